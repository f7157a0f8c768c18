"""Request review lifecycle.

- extractor: public ID detection in free-form text
- routing: deterministic track selection
- naming: review thread name <-> thread pair
- messages: embeds and texts posted by the lifecycle
- lifecycle: side-effect choreography across intake, review and approvals channels
"""

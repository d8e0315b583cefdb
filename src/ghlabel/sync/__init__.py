"""Label reconciliation.

- `plan`: the immutable action plan data model
- `engine`: computes the plan from desired and actual labels (pure)
- `executor`: applies or previews a plan against a remote
"""

__all__: list[str] = []

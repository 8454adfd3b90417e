"""
Core context propagation layer.

Identity, clocks and id generation at the bottom; the scoped GridContext,
transport mappers, outbound binders and health aggregation on top. Nothing
here depends on a web framework.
"""

"""FlowBridge execution library.

Kept free of imports so the Temporal workflow sandbox can load
``flowbridge_execution.workflows`` without pulling in the backend or
projector modules.
"""

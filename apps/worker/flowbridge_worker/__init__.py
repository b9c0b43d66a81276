"""FlowBridge Temporal worker."""

"""FlowBridge HTTP API."""

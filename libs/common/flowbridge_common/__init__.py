"""Shared configuration, logging and error types for FlowBridge."""

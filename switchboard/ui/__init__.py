"""Terminal UI for switchboard."""

"""Agent Council: multi-model deliberation with anonymous peer ranking."""

"""HTTP surface for the topic news feed."""

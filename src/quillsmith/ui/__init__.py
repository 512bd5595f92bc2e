"""User interfaces built on top of the QuillSmith renderer."""

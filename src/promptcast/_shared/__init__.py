"""Internal helpers shared by the request and response layers."""

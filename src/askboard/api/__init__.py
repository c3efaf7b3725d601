"""HTTP API for askboard."""

"""Remote build-and-run service for uploaded source archives."""

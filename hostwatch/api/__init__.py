"""HTTP routers for the hostwatch service."""

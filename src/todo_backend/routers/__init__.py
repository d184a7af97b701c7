"""HTTP routers for todos and their tags."""

"""HTTP routers and the authentication dependency."""

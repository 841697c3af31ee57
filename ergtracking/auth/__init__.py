"""Discord OAuth2 login and server-side sessions."""

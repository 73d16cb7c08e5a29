"""Use-cases for the /current endpoint, independent of HTTP."""

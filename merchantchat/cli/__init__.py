"""merchantchat command line interface."""

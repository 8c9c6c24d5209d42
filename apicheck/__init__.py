"""Monitoring check for endpoints that report their health as an XML CheckResponse."""

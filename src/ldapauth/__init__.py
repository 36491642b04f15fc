"""Authenticate users against an LDAP directory."""

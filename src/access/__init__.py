"""
Helpdesk access engine: permission checks, account-hierarchy guards and
email-domain routing for a multi-tenant helpdesk.
"""

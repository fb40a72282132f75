"""Access bounded context.

Decides whether a signed-in user may use the resolved tenant: membership,
bans, organization-only tenants and pending email confirmation.
"""

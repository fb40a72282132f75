"""Pipeline bounded context.

Runs the ordered, short-circuiting chain of steps every request passes
before its handler: transport security, sign-in, tenant resolution,
locale negotiation, correlation id and access gates.
"""

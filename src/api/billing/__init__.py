"""Billing bounded context.

Read-only view of plan status and promotional pricing. Billing
computations happen elsewhere; this context only consumes their results.
"""

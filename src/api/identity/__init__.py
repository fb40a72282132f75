"""Identity bounded context.

Signs users in from one-time login tokens, loads the session identity and
recovers from sessions that upstream services no longer accept.
"""

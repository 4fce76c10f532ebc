"""Users feature package: user records maintained by the sign-in flow.

Authentication itself lives outside this service; this package only keeps the
stored record consistent through an explicit merge of partial updates.
"""

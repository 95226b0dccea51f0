"""Exact token amounts.

- :py:mod:`tokenamount.token` describes tokens

- :py:mod:`tokenamount.amount` has exact integer amounts of tokens

- :py:mod:`tokenamount.amount_set` sums amounts of many tokens
"""

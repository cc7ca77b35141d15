"""Cipher, chunking and group primitives for confidential balances."""

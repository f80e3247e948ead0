"""
rfc5444dump - command-line inspector for RFC 5444 packets.
"""

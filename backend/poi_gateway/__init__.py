"""
Proof-of-Ink upload gateway.

Brokers uploads to, and promotion between folders of, a write-protected
object-storage bucket on behalf of an untrusted browser client.
"""

"""
Inventory API package.

A thin FastAPI facade over the hosted product catalog (Supabase/Postgres),
its password sign-in, and presigned uploads to Cloudflare R2.
"""

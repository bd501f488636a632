"""Catalog models, money helpers and Supabase repositories."""

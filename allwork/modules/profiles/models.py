# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- email: text (not null)
- display_name: text (nullable) - "first last" trimmed, or email local-part
- first_name: text (nullable)
- last_name: text (nullable)
- position: text (nullable)
- updated_at: timestamp (nullable)
"""

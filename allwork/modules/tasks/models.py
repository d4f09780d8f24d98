# Supabase table: tasks
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

tasks:
- id: bigint (primary key, identity)
- title: text (not null)
- description: text (nullable)
- status: text (not null, default: 'todo') - values: todo, doing, done
- priority: text (not null, default: 'medium') - values: low, medium, high
- due_date: date (nullable)
- assignee_id: uuid (foreign key to profiles.id) - expected to be a member of team_id
- team_id: bigint (foreign key to teams.id, not null)
- created_at: timestamp (default: now())

Realtime: the table must be part of the supabase_realtime publication so
board sessions receive postgres_changes for it.
"""

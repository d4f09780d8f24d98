# Supabase tables: teams, team_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

teams:
- id: bigint (primary key, identity)
- name: text (not null)
- created_at: timestamp (default: now())

team_members:
- team_id: bigint (foreign key to teams.id, not null)
- user_id: uuid (foreign key to profiles.id, not null)
- role: text (not null, default: 'member') - values: owner, member
- unique constraint on (team_id, user_id)

A team may only be deleted once it owns no rows in tasks. Nothing in the
database enforces this; TeamService.delete_team checks it before deleting.
"""

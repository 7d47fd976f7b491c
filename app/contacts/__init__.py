"""
Contacts app: a user's address book of other users.

A contact is a directed edge (owner -> contact user) carrying a nickname and
block/favorite flags. Blocking is consulted by chat when a direct
conversation is created (see contacts.policies).
"""

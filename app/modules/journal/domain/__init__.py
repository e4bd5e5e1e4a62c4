# 📄 File: app/modules/journal/domain/__init__.py
# 🧭 Purpose (Layman Explanation):
# Organizes the core rules of the journal: what a memory looks like and the one-memory-a-day rule
# 🧪 Purpose (Technical Summary):
# Domain layer initialization containing the JournalEntry entity, the repository interface,
# domain events and the JournalService
# 🔗 Dependencies:
# Domain models, services, repositories, events from subpackages
# 🔄 Connected Modules / Calls From:
# Application layer, Infrastructure layer

"""
Journal Domain Layer

Domain Models:
- JournalEntry: one day's memory with its icon and garden position
- IconType: closed set of icon categories

Domain Services:
- JournalService: upsert per day, growth duration, snapshot and live reads

Repository Interfaces:
- JournalRepository: entry store contract

Domain Events:
- JournalEntryCreated / JournalEntryUpdated / JournalEntryDeleted

Business Rules Enforced:
- At most one entry per local calendar date
- Non-blank memory text
- Icon variant 1-8, grid position 0.0-1.0
"""

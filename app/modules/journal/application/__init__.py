# 📄 File: app/modules/journal/application/__init__.py
# 🧭 Purpose (Layman Explanation):
# Holds the views built on top of the journal: the garden page and the home-screen widgets.
# 🧪 Purpose (Technical Summary):
# Application layer with read-model projections over JournalService.
# 🔗 Dependencies:
# app.modules.journal.domain
# 🔄 Connected Modules / Calls From:
# app.main, UI shells, widget refresh workers

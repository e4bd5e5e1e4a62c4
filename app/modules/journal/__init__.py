# 📄 File: app/modules/journal/__init__.py
# 🧭 Purpose (Layman Explanation):
# Groups everything about the daily memory journal: what a memory is, how it is saved,
# and how the garden and widgets read it back.
# 🧪 Purpose (Technical Summary):
# Journal bounded context with domain (models, repository contract, events, service),
# infrastructure (SQLAlchemy repository) and application (read projections) layers.
# 🔗 Dependencies:
# app.shared (config, core, infrastructure, utils)
# 🔄 Connected Modules / Calls From:
# app.main composition root, tests

"""
Journal Module

One memory per local calendar day, drawn as a plant in a year-long garden.
"""

"""Lesson Ledger package.

Tracks attendance and prepaid class credits for a recurring-lesson business.
Organized by feature modules (students, attendance, ledger, reports) with a
thin Flask controller layer over service/repository layers.
"""

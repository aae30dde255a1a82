"""
HTTP trigger for the export job.

A single Django view at /api/sync-invoices; a cron service calls it with GET.
"""

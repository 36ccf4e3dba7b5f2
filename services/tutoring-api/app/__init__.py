"""Tutoring intake API.

Accepts student enrolments, issue reports and session summary reports from
web forms and the Flowise chatbot, stores them in MongoDB and sends
notification emails to the operations inbox.
"""

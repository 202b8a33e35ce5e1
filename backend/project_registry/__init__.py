"""Project reference registry backed by MongoDB"""

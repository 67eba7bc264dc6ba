"""CVE knowledge cache"""

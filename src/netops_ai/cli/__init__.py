"""NetOps AI command line interface"""

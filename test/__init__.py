"""Cinema reservation service test suite"""

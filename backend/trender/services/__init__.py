"""Business services"""

"""
CLImage: a thin OpenCV image handle for the command-line image tool.
"""

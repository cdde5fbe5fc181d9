import os
import unittest

def test_suite():
    basedir = os.path.dirname(os.path.realpath(__file__))
    loader = unittest.TestLoader()
    return loader.discover(basedir, pattern='test_*.py', top_level_dir=os.path.dirname(basedir))

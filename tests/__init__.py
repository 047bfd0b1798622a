"""
Pizzeria core unit tests
"""

import unittest
from .test_api import APITests, PageSizeLimitTests, StoreFailureTests
from .test_codec import CodecTests, ProjectionTests
from .test_conditional import ConditionalHeaderTests, ETagTests
from .test_settings import CLITests, SettingsTests
from .test_store import MemoryStoreTests


TEST_CLASSES = [
    APITests,
    CLITests,
    CodecTests,
    ConditionalHeaderTests,
    ETagTests,
    MemoryStoreTests,
    PageSizeLimitTests,
    ProjectionTests,
    SettingsTests,
    StoreFailureTests,
]


def get_suite() -> unittest.TestSuite:
    suite = unittest.TestSuite()
    for cls in TEST_CLASSES:
        for fixture in filter(lambda f: f.startswith("test_"), dir(cls)):
            suite.addTest(cls(fixture))
    return suite

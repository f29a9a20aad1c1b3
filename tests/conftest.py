import logging

import ezdxf
import pytest

from cutpath import create_app


# Configure logging at session start to also capture pytest errors
@pytest.hookimpl(tryfirst=True)
def pytest_configure(config):
    file_handler = logging.FileHandler('error.log', mode='a', encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
    file_handler.setFormatter(formatter)
    root_logger = logging.getLogger()
    root_logger.addHandler(file_handler)
    config._errorlog_file_handler = file_handler
    root_logger.info('PYTEST STARTUP: conftest.py loaded and logging configured.')


@pytest.hookimpl(tryfirst=True)
def pytest_unconfigure(config):
    file_handler = getattr(config, '_errorlog_file_handler', None)
    if file_handler is not None:
        logging.getLogger().removeHandler(file_handler)
        file_handler.close()


# Log all test failures and errors to error.log
@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    rep = outcome.get_result()
    if rep.when == 'call' and rep.failed:
        logger = logging.getLogger()
        logger.error(f"Test {item.nodeid} {rep.outcome.upper()}")
        if rep.longrepr:
            logger.error(f"Failure traceback for {item.nodeid}:\n{rep.longrepr}")


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    return create_app({
        'TESTING': True,
        'DEBUG': True,
        'UPLOAD_FOLDER': str(tmp_path_factory.mktemp('uploads')),
    })


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_dxf(tmp_path):
    """Build a DXF file with ezdxf; ``build`` receives the modelspace."""
    def _make(build, name='part.dxf'):
        doc = ezdxf.new('R2010')
        build(doc.modelspace())
        path = tmp_path / name
        doc.saveas(path)
        return path
    return _make


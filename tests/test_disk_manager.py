import random

import pytest

from rucdb.errors import (
    FileExistsError,
    FileNotClosedError,
    FileNotFoundError,
    FileNotOpenError,
)
from rucdb.storage.disk_manager import LOG_FILE_NAME, DiskManager
from rucdb.storage.page import PAGE_SIZE

MAX_FILES = 32
MAX_PAGES = 128


@pytest.fixture
def disk(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    manager = DiskManager()
    yield manager
    for fd in list(manager._fd2path):
        manager.close_file(fd)


def test_file_operation(disk):
    rng = random.Random(1)
    fd2name = {}
    for i in range(MAX_FILES):
        filename = f"FileOperationTestFile{i}"
        if disk.is_file(filename):
            disk.destroy_file(filename)
        with pytest.raises(FileNotFoundError):
            disk.open_file(filename)
        disk.create_file(filename)
        assert disk.is_file(filename) is True
        with pytest.raises(FileExistsError):
            disk.create_file(filename)
        fd = disk.open_file(filename)
        fd2name[fd] = filename
        if rng.randrange(5) == 0:
            disk.close_file(fd)
            del fd2name[fd]
            new_fd = disk.open_file(filename)
            fd2name[new_fd] = filename

    for fd, filename in fd2name.items():
        disk.close_file(fd)
        disk.destroy_file(filename)
        assert disk.is_file(filename) is False
        with pytest.raises(FileNotFoundError):
            disk.destroy_file(filename)


def test_page_operation(disk):
    rng = random.Random(2)
    filename = "PageOperationTestFile"
    disk.create_file(filename)
    assert disk.is_file(filename) is True
    fd = disk.open_file(filename)
    disk.set_fd2pageno(fd, 0)
    for page_no in range(MAX_PAGES):
        assert disk.allocate_page(fd) == page_no
        data = rng.randbytes(PAGE_SIZE)
        disk.write_page(fd, page_no, data)
        assert disk.read_page(fd, page_no, PAGE_SIZE) == data
    disk.close_file(fd)
    disk.destroy_file(filename)
    assert disk.is_file(filename) is False


def test_write_to_unallocated_page_is_ignored(disk):
    disk.create_file("f")
    fd = disk.open_file("f")
    disk.write_page(fd, 0, b"x" * PAGE_SIZE)
    assert disk.get_file_size("f") == 0
    assert disk.read_page(fd, 0, 8) == bytes(8)


def test_read_past_end_pads_with_zeros(disk):
    disk.create_file("f")
    fd = disk.open_file("f")
    disk.allocate_page(fd)
    disk.allocate_page(fd)
    disk.write_page(fd, 0, b"abc")
    assert disk.read_page(fd, 0, 5) == b"abc\x00\x00"
    assert disk.read_page(fd, 1, 4) == bytes(4)


def test_file_size_after_page_write(disk):
    disk.create_file("f")
    fd = disk.open_file("f")
    disk.allocate_page(fd)
    disk.write_page(fd, 0, bytes(PAGE_SIZE))
    assert disk.get_file_size("f") == PAGE_SIZE


def test_file_size_of_missing_file(disk):
    with pytest.raises(FileNotFoundError):
        disk.get_file_size("missing")


def test_destroy_open_file_raises(disk):
    disk.create_file("f")
    disk.open_file("f")
    with pytest.raises(FileNotClosedError):
        disk.destroy_file("f")


def test_close_unopened_fd_raises(disk):
    with pytest.raises(FileNotOpenError):
        disk.close_file(9999)


def test_open_twice_returns_same_fd(disk):
    disk.create_file("f")
    fd = disk.open_file("f")
    assert disk.open_file("f") == fd


def test_file_name_and_fd_lookup(disk):
    disk.create_file("f")
    fd = disk.get_file_fd("f")
    assert disk.get_file_name(fd) == "f"
    assert disk.get_file_fd("f") == fd
    disk.close_file(fd)
    with pytest.raises(FileNotOpenError):
        disk.get_file_name(fd)


def test_fd2pageno_counter(disk):
    disk.create_file("f")
    fd = disk.open_file("f")
    assert disk.get_fd2pageno(fd) == 0
    disk.set_fd2pageno(fd, 5)
    assert disk.allocate_page(fd) == 5
    assert disk.get_fd2pageno(fd) == 6


def test_directories(disk):
    assert disk.is_dir("d") is False
    disk.create_dir("d")
    assert disk.is_dir("d") is True
    disk.destroy_dir("d")
    assert disk.is_dir("d") is False


def test_log_round_trip(disk):
    disk.create_file(LOG_FILE_NAME)
    disk.write_log(b"abc")
    disk.write_log(b"defg")
    assert disk.read_log(4, 0, 0) == b"abcd"
    assert disk.read_log(10, 2, 3) == b"fg"
    assert disk.read_log(1, 7, 0) == b""


def test_log_requires_log_file(disk):
    with pytest.raises(FileNotFoundError):
        disk.write_log(b"x")
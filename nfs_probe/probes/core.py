"""Core filesystem probes.

The probes run in catalogue order against one directory and several consume
artifacts left by earlier ones: ``test.txt`` is created first and must survive
until ``hardlink``, ``subdir/`` and ``deep/`` carry files between the directory
probes, and ``delete_file``/``rmdir`` clean those up again. Independent probes
create and remove their own files.
"""

import os
import shutil
import stat
import tempfile
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from nfs_probe.models.result import ProbeOutcome
from nfs_probe.probes.base import Probe, ProbeFailure, ensure_unique_names

TEST_FILE = "test.txt"
INITIAL_CONTENT = b"hello nfs"
APPENDED_CONTENT = b"\nappended line"
OVERWRITE_CONTENT = b"overwritten content"
CHMOD_MODE = 0o755

RENAMED_FILE = "renamed.txt"
COPY_FILE = "test-copy.txt"
SYMLINK_FILE = "test-link.txt"
HARDLINK_FILE = "test-hardlink.txt"

SUBDIR = "subdir"
NESTED_ROOT = "deep"
NESTED_PATH = ("deep", "nested", "dir")
SUBDIR_FILE = "subfile.txt"
SUBDIR_CONTENT = b"subdir content"
MOVED_FILE = "moved.txt"

LARGE_FILE_SIZE = 1024 * 1024
CONCURRENT_WRITERS = 5
TRUNCATE_SOURCE = b"this is a long string for truncation"
TRUNCATE_SIZE = 10
MTIME_INTERVAL = 0.1
READDIR_COUNT = 50
SPARSE_OFFSET = 1024 * 1024
SPARSE_PAYLOAD = b"sparse data here"
SEEK_INITIAL = b"AAAAAAAAAA"
SEEK_OFFSET = 5
SEEK_PATCH = b"BBBBB"
SEEK_EXPECTED = b"AAAAABBBBB"


def _mode(path: Path) -> str:
    return stat.filemode(path.lstat().st_mode)


def _format_mtime(mtime_ns: int) -> str:
    moment = datetime.fromtimestamp(mtime_ns / 1e9, tz=timezone.utc)
    return moment.isoformat(timespec="microseconds")


def create_file(directory: Path) -> ProbeOutcome:
    """Create the target directory and write ``test.txt``."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / TEST_FILE
    before = f"{TEST_FILE} exists={path.exists()}"

    path.write_bytes(INITIAL_CONTENT)
    size = path.stat().st_size

    return ProbeOutcome(
        before=before,
        after=f"{TEST_FILE} size={size}",
        context=f"Path.write_bytes {TEST_FILE}",
        details=f"created {path} ({size} bytes)",
    )


def read_file(directory: Path) -> ProbeOutcome:
    """Read ``test.txt`` back and verify the bytes written by create_file."""
    path = directory / TEST_FILE
    context = "Path.read_bytes + content verify"
    before = f"{TEST_FILE} size={path.stat().st_size}"

    data = path.read_bytes()
    match = str(data == INITIAL_CONTENT).lower()
    outcome = ProbeOutcome(
        before=before, after=f"read {len(data)} bytes, match={match}", context=context
    )
    if data != INITIAL_CONTENT:
        raise ProbeFailure(
            f"content mismatch: got {data!r}, want {INITIAL_CONTENT!r}", outcome
        )

    return replace(outcome, details=f"read {len(data)} bytes, content verified")


def stat_file(directory: Path) -> ProbeOutcome:
    """Report the metadata of ``test.txt``."""
    path = directory / TEST_FILE
    info = path.stat()
    return ProbeOutcome(
        context="os.stat metadata check",
        details=(
            f"name={path.name} size={info.st_size} "
            f"mode={stat.filemode(info.st_mode)} uid={info.st_uid} "
            f"gid={info.st_gid} nlink={info.st_nlink} "
            f"modtime={_format_mtime(info.st_mtime_ns)}"
        ),
    )


def append_file(directory: Path) -> ProbeOutcome:
    """Append a line to ``test.txt`` through an O_APPEND handle."""
    path = directory / TEST_FILE
    before_content = path.read_bytes()

    with path.open("ab") as handle:
        written = handle.write(APPENDED_CONTENT)

    return ProbeOutcome(
        before=f"size={len(before_content)} content={before_content!r}",
        after=f"size={path.stat().st_size}",
        context="open(mode='ab') write",
        details=f"appended {written} bytes",
    )


def overwrite_file(directory: Path) -> ProbeOutcome:
    """Replace the contents of ``test.txt`` and read them back."""
    path = directory / TEST_FILE
    context = "overwrite + read-back verify"
    before = f"size={path.stat().st_size}"

    path.write_bytes(OVERWRITE_CONTENT)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ProbeFailure(
            f"read-back failed: {exc}", ProbeOutcome(before=before, context=context)
        ) from exc

    outcome = ProbeOutcome(before=before, after=f"content={data!r}", context=context)
    if data != OVERWRITE_CONTENT:
        raise ProbeFailure(f"content mismatch after overwrite: got {data!r}", outcome)

    return replace(outcome, details="overwritten and verified")


def chmod_file(directory: Path) -> ProbeOutcome:
    """Change the permission bits of ``test.txt``."""
    path = directory / TEST_FILE
    context = f"os.chmod {CHMOD_MODE:o}"
    before_mode = _mode(path)

    path.chmod(CHMOD_MODE)
    after_mode = _mode(path)
    outcome = ProbeOutcome(
        before=f"mode={before_mode}", after=f"mode={after_mode}", context=context
    )

    if stat.S_IMODE(path.stat().st_mode) != CHMOD_MODE:
        raise ProbeFailure(f"mode not applied: got {after_mode}", outcome)

    return replace(outcome, details=f"chmod {before_mode} -> {after_mode}")


def rename_file(directory: Path) -> ProbeOutcome:
    """Rename ``test.txt`` within the directory and back again."""
    src = directory / TEST_FILE
    dst = directory / RENAMED_FILE
    context = "os.rename within same dir"
    before = f"{TEST_FILE} exists={src.exists()}, {RENAMED_FILE} exists={dst.exists()}"

    src.rename(dst)
    after = f"{TEST_FILE} exists={src.exists()}, {RENAMED_FILE} exists={dst.exists()}"
    outcome = ProbeOutcome(before=before, after=after, context=context)
    if src.exists() or not dst.exists():
        raise ProbeFailure("rename not visible", outcome)

    try:
        dst.rename(src)
    except OSError as exc:
        raise ProbeFailure(f"rename-back failed: {exc}", outcome) from exc

    return replace(outcome, details="renamed and renamed back")


def copy_file(directory: Path) -> ProbeOutcome:
    """Copy ``test.txt`` by reading it and writing a new file."""
    src = directory / TEST_FILE
    dst = directory / COPY_FILE
    outcome = ProbeOutcome(
        before=f"{COPY_FILE} exists={dst.exists()}", context="read src + write dst copy"
    )

    data = src.read_bytes()
    dst.write_bytes(data)
    size = dst.stat().st_size
    outcome = replace(outcome, after=f"{COPY_FILE} exists=True size={size}")

    if size != len(data):
        raise ProbeFailure(
            f"copy size mismatch: wrote {len(data)}, found {size}", outcome
        )

    return replace(outcome, details=f"copied {size} bytes to {dst}")


def symlink(directory: Path) -> ProbeOutcome:
    """Create a symbolic link to ``test.txt`` and resolve it."""
    target = directory / TEST_FILE
    link = directory / SYMLINK_FILE
    context = "os.symlink + os.readlink"
    before = f"{SYMLINK_FILE} exists={os.path.lexists(link)}"

    # Relative target so the link resolves wherever the directory is mounted.
    link.symlink_to(TEST_FILE)
    try:
        resolved = link.readlink()
    except OSError as exc:
        raise ProbeFailure(
            f"readlink failed: {exc}", ProbeOutcome(before=before, context=context)
        ) from exc

    outcome = ProbeOutcome(
        before=before, after=f"{SYMLINK_FILE} -> {resolved}", context=context
    )
    if resolved != Path(TEST_FILE):
        raise ProbeFailure(f"symlink resolves to {resolved}, want {TEST_FILE}", outcome)
    if link.read_bytes() != target.read_bytes():
        raise ProbeFailure("content read through symlink differs from target", outcome)

    return replace(outcome, details=f"symlink {link} -> {resolved}")


def mkdir(directory: Path) -> ProbeOutcome:
    """Create a single subdirectory."""
    path = directory / SUBDIR
    before = f"{SUBDIR}/ exists={path.exists()}"

    path.mkdir()
    outcome = ProbeOutcome(
        before=before,
        after=f"{SUBDIR}/ is_dir={path.is_dir()}",
        context="os.mkdir single dir",
    )
    if not path.is_dir():
        raise ProbeFailure(f"{path} is not a directory after mkdir", outcome)

    return replace(outcome, details=f"created {path}")


def nested_mkdir(directory: Path) -> ProbeOutcome:
    """Create a three level directory path in one call."""
    path = directory.joinpath(*NESTED_PATH)
    before = f"{NESTED_ROOT}/ exists={(directory / NESTED_ROOT).exists()}"

    path.mkdir(parents=True)
    outcome = ProbeOutcome(
        before=before,
        after=f"{'/'.join(NESTED_PATH)}/ is_dir={path.is_dir()}",
        context="os.makedirs 3-level deep",
    )
    if not path.is_dir():
        raise ProbeFailure(f"{path} is not a directory after makedirs", outcome)

    return replace(outcome, details=f"created {path}")


def create_in_subdir(directory: Path) -> ProbeOutcome:
    """Write a file inside the subdirectory created by mkdir."""
    path = directory / SUBDIR / SUBDIR_FILE
    before = f"{SUBDIR}/{SUBDIR_FILE} exists={path.exists()}"

    path.write_bytes(SUBDIR_CONTENT)

    return ProbeOutcome(
        before=before,
        after=f"{SUBDIR}/{SUBDIR_FILE} size={path.stat().st_size}",
        context="write file inside subdir",
        details=f"created {path}",
    )


def cross_dir_rename(directory: Path) -> ProbeOutcome:
    """Move the subdirectory file into the nested directory tree."""
    src = directory / SUBDIR / SUBDIR_FILE
    dst = directory / NESTED_ROOT / MOVED_FILE
    outcome = ProbeOutcome(
        before=f"{SUBDIR}/{SUBDIR_FILE} exists={src.exists()}",
        context="os.rename across directories",
    )

    src.rename(dst)
    try:
        dst.stat()
    except OSError as exc:
        raise ProbeFailure(
            f"file missing after cross-dir rename: {exc}", outcome
        ) from exc

    return replace(
        outcome,
        after=f"{NESTED_ROOT}/{MOVED_FILE} exists=True, {SUBDIR}/{SUBDIR_FILE} "
        f"exists={src.exists()}",
        details=f"moved {src} -> {dst}",
    )


def delete_file(directory: Path) -> ProbeOutcome:
    """Delete the copy and the symlink made by earlier probes."""
    names = (COPY_FILE, SYMLINK_FILE)
    present = [name for name in names if os.path.lexists(directory / name)]
    outcome = ProbeOutcome(
        before=f"exist: {', '.join(present) or '(none)'}",
        context="os.unlink file deletion",
    )

    for name in names:
        try:
            (directory / name).unlink(missing_ok=True)
        except OSError as exc:
            raise ProbeFailure(f"delete {name}: {exc}", outcome) from exc

    remaining = [name for name in names if os.path.lexists(directory / name)]
    outcome = replace(outcome, after=f"exist: {', '.join(remaining) or '(none)'}")
    if remaining:
        raise ProbeFailure(
            f"still present after delete: {', '.join(remaining)}", outcome
        )
    return replace(outcome, details=f"deleted {' and '.join(names)}")


def rmdir(directory: Path) -> ProbeOutcome:
    """Recursively remove the nested tree and the subdirectory."""
    names = (NESTED_ROOT, SUBDIR)
    present = [f"{name}/" for name in names if (directory / name).is_dir()]
    outcome = ProbeOutcome(
        before=f"dirs: {', '.join(present) or '(none)'}",
        context="shutil.rmtree recursive",
    )

    for name in names:
        try:
            shutil.rmtree(directory / name)
        except FileNotFoundError:
            continue
        except OSError as exc:
            raise ProbeFailure(f"rmdir {name}: {exc}", outcome) from exc

    remaining = [f"{name}/" for name in names if (directory / name).exists()]
    outcome = replace(outcome, after=f"dirs: {', '.join(remaining) or '(none)'}")
    if remaining:
        raise ProbeFailure(
            f"still present after rmdir: {', '.join(remaining)}", outcome
        )
    return replace(outcome, details=f"removed {SUBDIR} and {NESTED_ROOT} directories")


def large_file_1mb(directory: Path) -> ProbeOutcome:
    """Write 1 MiB, read it back and report write throughput."""
    path = directory / "large.bin"
    outcome = ProbeOutcome(
        before=f"{path.name} exists={path.exists()}",
        context="1MB write + read-back throughput",
    )
    data = bytes(range(256)) * (LARGE_FILE_SIZE // 256)

    start = time.perf_counter()
    path.write_bytes(data)
    elapsed = time.perf_counter() - start

    try:
        read_back = path.read_bytes()
    except OSError as exc:
        raise ProbeFailure(f"read-back failed: {exc}", outcome) from exc
    path.unlink()

    verified = read_back == data
    outcome = replace(
        outcome, after=f"{path.name} size={len(read_back)} verified={verified}"
    )
    if len(read_back) != len(data):
        raise ProbeFailure(
            f"size mismatch: wrote {len(data)}, read {len(read_back)}", outcome
        )
    if not verified:
        raise ProbeFailure("content mismatch in 1MB read-back", outcome)

    speed = len(data) / elapsed / (1024 * 1024) if elapsed > 0 else float("inf")
    return replace(
        outcome,
        details=f"1MB write in {elapsed * 1000:.1f}ms ({speed:.2f} MB/s), "
        "read-back verified",
    )


def _concurrent_path(directory: Path, index: int) -> Path:
    return directory / f"concurrent-{index}.txt"


def concurrent_writes(directory: Path) -> ProbeOutcome:
    """Write distinct files from parallel workers and verify each one."""
    outcome = ProbeOutcome(
        context=f"{CONCURRENT_WRITERS} threads writing simultaneously"
    )

    def write(index: int) -> None:
        _concurrent_path(directory, index).write_text(f"writer {index}")

    with ThreadPoolExecutor(max_workers=CONCURRENT_WRITERS) as executor:
        futures = [executor.submit(write, index) for index in range(CONCURRENT_WRITERS)]

    errors = [
        f"writer {index}: {future.exception()}"
        for index, future in enumerate(futures)
        if future.exception() is not None
    ]
    if errors:
        raise ProbeFailure("; ".join(errors), outcome)

    for index in range(CONCURRENT_WRITERS):
        path = _concurrent_path(directory, index)
        try:
            content = path.read_text()
        except OSError as exc:
            raise ProbeFailure(f"verify writer {index}: {exc}", outcome) from exc
        if content != f"writer {index}":
            raise ProbeFailure(
                f"writer {index} content mismatch: got {content!r}", outcome
            )
        path.unlink()

    return replace(
        outcome,
        after=f"{CONCURRENT_WRITERS} files verified and removed",
        details=f"{CONCURRENT_WRITERS} concurrent writes verified",
    )


def file_lock(directory: Path) -> ProbeOutcome:
    """Write at offset 0 through a read-write descriptor held open."""
    path = directory / "locktest.txt"
    original = b"lock test"
    patch = b"locked"
    outcome = ProbeOutcome(
        before=f"content={original!r}", context="os.pwrite at offset 0 with open fd"
    )

    path.write_bytes(original)
    with path.open("r+b") as handle:
        try:
            os.pwrite(handle.fileno(), patch, 0)
        except OSError as exc:
            raise ProbeFailure(f"write-at with open fd: {exc}", outcome) from exc

    data = path.read_bytes()
    path.unlink()

    expected = patch + original[len(patch) :]
    outcome = replace(outcome, after=f"content={data!r}")
    if data != expected:
        raise ProbeFailure(
            f"write-at mismatch: got {data!r}, want {expected!r}", outcome
        )

    return replace(outcome, details="file lock (write-at with open fd) succeeded")


def truncate_file(directory: Path) -> ProbeOutcome:
    """Shrink a file and check the exact resulting byte count."""
    path = directory / "truncate-test.txt"
    outcome = ProbeOutcome(
        before=f"size={len(TRUNCATE_SOURCE)}", context="os.truncate shrink file"
    )

    path.write_bytes(TRUNCATE_SOURCE)
    os.truncate(path, TRUNCATE_SIZE)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ProbeFailure(f"read after truncate: {exc}", outcome) from exc
    path.unlink()

    outcome = replace(outcome, after=f"size={len(data)}")
    if len(data) != TRUNCATE_SIZE:
        raise ProbeFailure(
            f"truncate failed: got {len(data)} bytes, want {TRUNCATE_SIZE}", outcome
        )
    if data != TRUNCATE_SOURCE[:TRUNCATE_SIZE]:
        raise ProbeFailure(f"truncated content mismatch: got {data!r}", outcome)

    return replace(outcome, details=f"truncated to {len(data)} bytes: {data!r}")


def hardlink(directory: Path) -> ProbeOutcome:
    """Hard link ``test.txt``, compare contents through both names, unlink."""
    src = directory / TEST_FILE
    dst = directory / HARDLINK_FILE
    before = f"{HARDLINK_FILE} exists={dst.exists()}"

    dst.hardlink_to(src)
    src_data = src.read_bytes()
    dst_data = dst.read_bytes()
    src_info = src.stat()
    same_inode = src_info.st_ino == dst.stat().st_ino
    dst.unlink()

    outcome = ProbeOutcome(
        before=before,
        after=f"{HARDLINK_FILE} nlink={src_info.st_nlink} same_inode={same_inode} "
        f"({len(dst_data)} bytes)",
        context="os.link + content compare",
    )
    if src_data != dst_data:
        raise ProbeFailure("hardlink content mismatch", outcome)

    return replace(
        outcome,
        details=f"hardlink created, content matches ({src_info.st_size} bytes)",
    )


def mkfifo(directory: Path) -> ProbeOutcome:
    """Create a named pipe, stat it and remove it."""
    path = directory / "test.fifo"
    before = f"{path.name} exists={os.path.lexists(path)}"

    os.mkfifo(path, 0o644)
    info = path.lstat()
    path.unlink()

    mode = stat.filemode(info.st_mode)
    outcome = ProbeOutcome(
        before=before, after=f"{path.name} mode={mode}", context="os.mkfifo named pipe"
    )
    if not stat.S_ISFIFO(info.st_mode):
        raise ProbeFailure(f"{path.name} is not a fifo (mode={mode})", outcome)

    return replace(outcome, details=f"created fifo {path} (mode={mode})")


def write_binary(directory: Path) -> ProbeOutcome:
    """Round-trip every possible byte value."""
    path = directory / "binary.bin"
    outcome = ProbeOutcome(
        before=f"{path.name} exists={path.exists()}",
        context="write all 256 byte values, read back",
    )
    data = bytes(range(256))

    path.write_bytes(data)
    try:
        read_back = path.read_bytes()
    except OSError as exc:
        raise ProbeFailure(f"read-back failed: {exc}", outcome) from exc
    path.unlink()

    outcome = replace(
        outcome,
        after=f"{path.name} size={len(read_back)} match={read_back == data}",
    )
    if read_back != data:
        raise ProbeFailure(
            f"binary data corruption: wrote {len(data)} bytes, "
            f"read {len(read_back)} bytes",
            outcome,
        )

    return replace(outcome, details="256-byte binary round-trip verified")


def mtime_check(directory: Path) -> ProbeOutcome:
    """Rewrite a file after a pause and require its mtime to advance.

    Filesystems with mtime resolution coarser than ``MTIME_INTERVAL`` can fail
    this probe without being broken.
    """
    path = directory / "mtime-test.txt"

    path.write_bytes(b"before")
    before_ns = path.stat().st_mtime_ns

    time.sleep(MTIME_INTERVAL)

    path.write_bytes(b"after modification")
    after_ns = path.stat().st_mtime_ns
    path.unlink()

    outcome = ProbeOutcome(
        before=f"mtime={_format_mtime(before_ns)}",
        after=f"mtime={_format_mtime(after_ns)}",
        context="verify mtime advances after write",
    )
    if after_ns <= before_ns:
        raise ProbeFailure(
            f"mtime did not advance: before={_format_mtime(before_ns)} "
            f"after={_format_mtime(after_ns)}",
            outcome,
        )

    return replace(
        outcome,
        details=f"mtime advanced (delta={(after_ns - before_ns) / 1e6:.1f}ms)",
    )


def readdir_many(directory: Path) -> ProbeOutcome:
    """Create many files in a fresh subdirectory and count the listing."""
    subdir = directory / "readdir-test"
    outcome = ProbeOutcome(
        before=f"{subdir.name}/ files={READDIR_COUNT}",
        context=f"create {READDIR_COUNT} files + os.listdir count",
    )

    subdir.mkdir(parents=True, exist_ok=True)
    for index in range(READDIR_COUNT):
        path = subdir / f"file-{index:03d}.txt"
        try:
            path.write_text(f"file {index}")
        except OSError as exc:
            raise ProbeFailure(f"create file {index}: {exc}", outcome) from exc

    try:
        entries = os.listdir(subdir)
    except OSError as exc:
        raise ProbeFailure(f"readdir: {exc}", outcome) from exc
    shutil.rmtree(subdir)

    outcome = replace(outcome, after=f"readdir returned {len(entries)} entries")
    if len(entries) != READDIR_COUNT:
        raise ProbeFailure(
            f"readdir returned {len(entries)} entries, want {READDIR_COUNT}", outcome
        )

    return replace(outcome, details=f"created and listed {READDIR_COUNT} files")


def sparse_write(directory: Path) -> ProbeOutcome:
    """Seek past end-of-file, write a payload and read it back at the offset."""
    path = directory / "sparse.bin"
    expected_size = SPARSE_OFFSET + len(SPARSE_PAYLOAD)
    before = f"{path.name} exists={path.exists()}"

    with path.open("wb") as handle:
        handle.seek(SPARSE_OFFSET)
        handle.write(SPARSE_PAYLOAD)

    info = path.stat()
    with path.open("rb") as handle:
        handle.seek(SPARSE_OFFSET)
        read_back = handle.read(len(SPARSE_PAYLOAD))
    path.unlink()

    outcome = ProbeOutcome(
        before=before,
        after=f"{path.name} logical_size={info.st_size} "
        f"allocated={info.st_blocks * 512}",
        context=f"seek to {SPARSE_OFFSET} offset, write {len(SPARSE_PAYLOAD)} bytes",
    )
    if read_back != SPARSE_PAYLOAD:
        raise ProbeFailure(f"sparse read mismatch: got {read_back!r}", outcome)
    if info.st_size != expected_size:
        raise ProbeFailure(
            f"sparse size mismatch: got {info.st_size}, want {expected_size}", outcome
        )

    return replace(
        outcome,
        details=f"sparse file: logical size={info.st_size}, wrote "
        f"{len(SPARSE_PAYLOAD)} bytes at offset {SPARSE_OFFSET}",
    )


def temp_file(directory: Path) -> ProbeOutcome:
    """Create a uniquely named temporary file inside the target directory."""
    content = b"temp file content"
    outcome = ProbeOutcome(
        before=f"target dir={directory} (not the system temp dir)",
        context="tempfile.mkstemp in target dir",
    )

    fd, name = tempfile.mkstemp(prefix="nfs-test-", suffix=".tmp", dir=directory)
    path = Path(name)
    with os.fdopen(fd, "wb") as handle:
        handle.write(content)

    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ProbeFailure(f"read temp file: {exc}", outcome) from exc
    path.unlink()

    outcome = replace(outcome, after=f"created {path.name} ({len(data)} bytes)")
    if data != content:
        raise ProbeFailure(f"temp file content mismatch: got {data!r}", outcome)

    return replace(outcome, details=f"temp file {path.name}: {len(data)} bytes")


def exclusive_create(directory: Path) -> ProbeOutcome:
    """Create with O_EXCL, then require a second O_EXCL create to be rejected."""
    path = directory / "exclusive.txt"
    flags = os.O_CREAT | os.O_EXCL | os.O_WRONLY
    path.unlink(missing_ok=True)
    outcome = ProbeOutcome(
        before=f"{path.name} exists={path.exists()}",
        context="os.open(O_CREAT | O_EXCL)",
    )

    try:
        fd = os.open(path, flags, 0o644)
    except OSError as exc:
        raise ProbeFailure(f"first exclusive create failed: {exc}", outcome) from exc
    try:
        os.write(fd, b"exclusive create")
    finally:
        os.close(fd)

    try:
        fd = os.open(path, flags, 0o644)
    except FileExistsError:
        rejected = True
    else:
        os.close(fd)
        rejected = False
    finally:
        path.unlink(missing_ok=True)

    verdict = "rejected" if rejected else "accepted"
    outcome = replace(outcome, after=f"{path.name} exists=True, 2nd O_EXCL {verdict}")
    if not rejected:
        raise ProbeFailure("O_EXCL did not reject duplicate create", outcome)

    return replace(
        outcome, details="O_EXCL create succeeded, duplicate correctly rejected"
    )


def seek_read_write(directory: Path) -> ProbeOutcome:
    """Overwrite bytes in the middle of a file through a seeked handle."""
    path = directory / "seektest.txt"
    outcome = ProbeOutcome(
        before=f"content={SEEK_INITIAL!r}",
        context=f"seek to offset {SEEK_OFFSET}, overwrite, verify",
    )

    path.write_bytes(SEEK_INITIAL)
    with path.open("r+b") as handle:
        handle.seek(SEEK_OFFSET)
        handle.write(SEEK_PATCH)

    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ProbeFailure(f"read-back: {exc}", outcome) from exc
    path.unlink()

    outcome = replace(outcome, after=f"content={data!r}")
    if data != SEEK_EXPECTED:
        raise ProbeFailure(
            f"seek write mismatch: got {data!r}, want {SEEK_EXPECTED!r}", outcome
        )

    return replace(outcome, details=f"seek write verified: {data!r}")


def core_probes() -> Sequence[Probe]:
    """Return the ordered core catalogue.

    A fresh tuple is built on every call. Order matters: later probes consume
    files and directories left by earlier ones.
    """
    return ensure_unique_names(
        Probe(name=fn.__name__, run=fn)
        for fn in (
            create_file,
            read_file,
            stat_file,
            append_file,
            overwrite_file,
            chmod_file,
            rename_file,
            copy_file,
            symlink,
            mkdir,
            nested_mkdir,
            create_in_subdir,
            cross_dir_rename,
            delete_file,
            rmdir,
            large_file_1mb,
            concurrent_writes,
            file_lock,
            truncate_file,
            hardlink,
            mkfifo,
            write_binary,
            mtime_check,
            readdir_many,
            sparse_write,
            temp_file,
            exclusive_create,
            seek_read_write,
        )
    )

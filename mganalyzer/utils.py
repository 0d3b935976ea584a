"""Helpful utilities for building the analysis pipeline.
"""
import os
import shutil
import time


def safe_makedir(dname):
    """Make a directory if it doesn't exist, handling concurrent race conditions.
    """
    if not dname:
        return dname
    num_tries = 0
    max_tries = 5
    while not os.path.exists(dname):
        # we could get an error here if another process is creating
        # the directory at the same time
        try:
            os.makedirs(dname)
        except OSError:
            if num_tries > max_tries:
                raise
            num_tries += 1
            time.sleep(2)
    return dname

def is_empty_dir(dname):
    return os.path.isdir(dname) and not os.listdir(dname)

def is_within(path, parent):
    """Check if path is parent itself or lies below it, after resolving links.
    """
    path = os.path.realpath(path)
    parent = os.path.realpath(parent)
    return path == parent or path.startswith(parent.rstrip(os.sep) + os.sep)

def remove_safe(f):
    try:
        if os.path.isdir(f):
            shutil.rmtree(f)
        else:
            os.remove(f)
    except OSError:
        pass

def move_contents(src_dir, dest_dir):
    """Move every entry of src_dir into dest_dir, replacing same named entries.
    """
    safe_makedir(dest_dir)
    moved = []
    for fname in sorted(os.listdir(src_dir)):
        target = os.path.join(dest_dir, fname)
        if os.path.lexists(target):
            remove_safe(target)
        shutil.move(os.path.join(src_dir, fname), target)
        moved.append(target)
    return moved

def get_abspath(path, pardir=None):
    if pardir is None:
        pardir = os.getcwd()
    path = os.path.expandvars(os.path.expanduser(path))
    return os.path.normpath(os.path.join(pardir, path))

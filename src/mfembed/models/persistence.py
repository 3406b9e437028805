"""
Binary persistence for factor stores.

Layout (little-endian, no padding):

    Options     dim:int32 r1:f32 r2:f32 mom:f32 eps:f32 init:f32
                min:f32 (NaN = unset) th:f32 maxit:int32
    Sizes       size1:int32 size2:int32 global_min:f32
    Rows        factors[size1*dim] bias[size1] delta[size1*dim] bias_delta[size1]
    Columns     (only if size2 > 0) same four arrays sized by size2

All arrays are float32 in C (row-major) order. The header is read first so
that every array can be sized before its payload is consumed. There is no
versioning or checksum.
"""

import os
import numpy as np
from pathlib import Path
from typing import Union

from .options import Options, INT32_MAX
from .factor_store import FactorStore, FactorBlock, FLOAT_DTYPE


PathLike = Union[str, os.PathLike]

HEADER_DTYPE = np.dtype([
    ('dim', '<i4'),
    ('r1', '<f4'),
    ('r2', '<f4'),
    ('mom', '<f4'),
    ('eps', '<f4'),
    ('init', '<f4'),
    ('min', '<f4'),
    ('th', '<f4'),
    ('maxit', '<i4'),
    ('size1', '<i4'),
    ('size2', '<i4'),
    ('global_min', '<f4'),
])

PAYLOAD_DTYPE = np.dtype('<f4')


def _block_nbytes(n_entities: int, dim: int) -> int:
    return PAYLOAD_DTYPE.itemsize * (2 * n_entities * dim + 2 * n_entities)


def dumps(store: FactorStore) -> bytes:
    """
    Serialize options and all factor state to bytes.

    Example:
        >>> blob = dumps(store)
        >>> restored = loads(blob)
    """
    for name, size in (('size1', store.size1), ('size2', store.size2)):
        if size > INT32_MAX:
            raise ValueError(f"{name} must be at most {INT32_MAX} to be saved, got {size}")

    opts = store.options
    header = np.zeros(1, dtype=HEADER_DTYPE)
    header['dim'] = opts.dim
    header['r1'] = opts.r1
    header['r2'] = opts.r2
    header['mom'] = opts.mom
    header['eps'] = opts.eps
    header['init'] = opts.init
    header['min'] = np.nan if opts.min is None else opts.min
    header['th'] = opts.th
    header['maxit'] = opts.maxit
    header['size1'] = store.size1
    header['size2'] = store.size2
    header['global_min'] = store.global_min

    chunks = [header.tobytes()]
    blocks = [store.rows] if store.symmetric else [store.rows, store.cols]
    for block in blocks:
        for array in block.arrays():
            chunks.append(np.ascontiguousarray(array, dtype=PAYLOAD_DTYPE).tobytes())
    return b''.join(chunks)


def loads(blob: bytes) -> FactorStore:
    """
    Rebuild a FactorStore from bytes produced by `dumps`.

    Raises:
        ValueError: If the buffer is truncated, carries trailing bytes, or
                    holds an invalid header
    """
    blob = memoryview(blob).cast('B')
    if len(blob) < HEADER_DTYPE.itemsize:
        raise ValueError(
            f"Model data too short for header: {len(blob)} < {HEADER_DTYPE.itemsize} bytes"
        )
    header = np.frombuffer(blob, dtype=HEADER_DTYPE, count=1)[0]

    min_value = float(header['min'])
    options = Options(
        dim=int(header['dim']),
        r1=float(header['r1']),
        r2=float(header['r2']),
        mom=float(header['mom']),
        eps=float(header['eps']),
        init=float(header['init']),
        min=None if np.isnan(min_value) else min_value,
        th=float(header['th']),
        maxit=int(header['maxit']),
    )
    size1 = int(header['size1'])
    size2 = int(header['size2'])
    if size1 < 1 or size2 < 0:
        raise ValueError(f"Invalid entity counts in model data: size1={size1}, size2={size2}")

    expected = HEADER_DTYPE.itemsize + _block_nbytes(size1, options.dim)
    if size2:
        expected += _block_nbytes(size2, options.dim)
    if len(blob) != expected:
        raise ValueError(
            f"Model data size mismatch: expected {expected} bytes for "
            f"size1={size1}, size2={size2}, dim={options.dim}, got {len(blob)}"
        )

    store = FactorStore(options, size1, size2, global_min=float(header['global_min']))
    offset = HEADER_DTYPE.itemsize
    blocks = [store.rows] if store.symmetric else [store.rows, store.cols]
    for block in blocks:
        offset = _read_block(blob, offset, block)
    return store


def _read_block(blob: memoryview, offset: int, block: FactorBlock) -> int:
    for array in block.arrays():
        payload = np.frombuffer(blob, dtype=PAYLOAD_DTYPE, count=array.size, offset=offset)
        array[...] = payload.reshape(array.shape).astype(FLOAT_DTYPE)
        offset += payload.nbytes
    return offset


def save_store(store: FactorStore, path: PathLike) -> None:
    """Write a store to a model file, creating parent directories."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'wb') as f:
        f.write(dumps(store))


def load_store(path: PathLike) -> FactorStore:
    """
    Read a store from a model file.

    Raises:
        FileNotFoundError: If the model file doesn't exist
        ValueError: If the file contents are not a valid model
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Model file not found: {path}")
    with open(path, 'rb') as f:
        return loads(f.read())

from __future__ import annotations

import copy
from pathlib import Path

import pytest

import proofparams.registry as reg
from proofparams.constants import (
    POST_CHALLENGE_COUNT,
    POST_CHALLENGED_NODES,
    SECTOR_SIZE_1_KIB,
    SECTOR_SIZE_32_GIB,
)
from proofparams.errors import ConfigurationDefect, DecodeError, VersionMismatch
from proofparams.registry import RegisteredPoStProof, RegisteredSealProof
from proofparams.tables import RegistryContext
from proofparams.tests import TEST_PARTITIONS, full_context
from proofparams.types import PoStConfigV1, ProofVersion, SealConfigV1

SEAL = list(RegisteredSealProof)
POST = list(RegisteredPoStProof)
ALL = SEAL + POST


@pytest.fixture(scope="module")
def ctx() -> RegistryContext:
    return full_context()


# ---------- accessors on every variant ----------


@pytest.mark.parametrize("proof", ALL, ids=lambda p: f"{type(p).__name__}.{p.tag}")
def test_accessors_succeed_for_every_variant(proof, ctx: RegistryContext) -> None:
    proof.to_config(ctx)  # must not raise
    assert proof.partition_count(ctx) > 0, "partition_count() failed"
    assert proof.sector_size() > 0, "sector_size() failed"
    assert proof.single_partition_proof_byte_length() > 0, "single_partition_proof_byte_length() failed"
    assert proof.version() is ProofVersion.V1, "version() was wrong"

    assert isinstance(proof.circuit_identifier(ctx), str)
    assert isinstance(proof.cache_path_for_verifying_key(ctx), Path)
    assert isinstance(proof.cache_path_for_parameters(ctx), Path)
    assert proof.verifying_key_content_id(ctx)
    assert proof.parameters_content_id(ctx)


def test_catalogs_have_five_variants_each() -> None:
    assert len(SEAL) == 5
    assert len(POST) == 5
    assert len(reg.all_proofs()) == 10
    assert len(set(reg.all_proofs())) == 10, "seal and PoSt variants must stay distinct values"


def test_catalogs_are_independent_types() -> None:
    s = RegisteredSealProof.STACKED_DRG_1KIB_V1
    p = RegisteredPoStProof.STACKED_DRG_1KIB_V1
    assert s.tag == p.tag
    assert s != p
    assert not isinstance(s, RegisteredPoStProof)
    assert not issubclass(RegisteredSealProof, RegisteredPoStProof)


def test_variants_have_value_semantics() -> None:
    p = RegisteredSealProof.STACKED_DRG_16MIB_V1
    assert copy.copy(p) is p
    assert copy.deepcopy(p) is p
    assert {p: 1}[RegisteredSealProof("StackedDrg16MiBV1")] == 1


@pytest.mark.parametrize(
    "seal, post",
    list(zip(SEAL, POST)),
    ids=lambda p: p.tag,
)
def test_catalogs_share_sector_size_classes(seal, post) -> None:
    assert seal.sector_size() == post.sector_size()


def test_sector_sizes_are_exact_byte_counts() -> None:
    assert RegisteredSealProof.STACKED_DRG_1KIB_V1.sector_size() == 1024
    assert RegisteredSealProof.STACKED_DRG_16MIB_V1.sector_size() == 16 * 1024 * 1024
    assert RegisteredSealProof.STACKED_DRG_256MIB_V1.sector_size() == 256 * 1024 * 1024
    assert RegisteredSealProof.STACKED_DRG_1GIB_V1.sector_size() == 1024 ** 3
    assert RegisteredSealProof.STACKED_DRG_32GIB_V1.sector_size() == 32 * 1024 ** 3


# ---------- partition counts ----------


def test_smallest_seal_variant_reads_partition_table() -> None:
    ctx = RegistryContext.build(partitions={**TEST_PARTITIONS, SECTOR_SIZE_1_KIB: 2})
    proof = RegisteredSealProof.STACKED_DRG_1KIB_V1
    assert proof.sector_size() == 1024
    assert proof.partition_count(ctx) == 2
    assert proof.partition_count(ctx) == ctx.partitions[1024]

    other = ctx.with_partitions({**TEST_PARTITIONS, SECTOR_SIZE_1_KIB: 3})
    assert proof.partition_count(other) == 3


def test_missing_partition_entry_is_configuration_defect() -> None:
    partitions = {k: v for k, v in TEST_PARTITIONS.items() if k != SECTOR_SIZE_32_GIB}
    ctx = RegistryContext.build(partitions=partitions)
    proof = RegisteredSealProof.STACKED_DRG_32GIB_V1

    with pytest.raises(ConfigurationDefect) as ei:
        proof.partition_count(ctx)
    assert ei.value.sector_size == SECTOR_SIZE_32_GIB
    assert ei.value.retryable is False
    assert ei.value.ctx["proof"] == "StackedDrg32GiBV1"

    # Everything derived from the partition count fails the same way.
    for op in (proof.to_config, proof.circuit_identifier, proof.cache_path_for_parameters):
        with pytest.raises(ConfigurationDefect):
            op(ctx)

    # Other sizes are unaffected.
    assert RegisteredSealProof.STACKED_DRG_1GIB_V1.partition_count(ctx) == TEST_PARTITIONS[1 << 30]


def test_post_partition_count_is_constant_without_lookup() -> None:
    empty = RegistryContext.build(partitions={})
    for proof in POST:
        assert proof.partition_count() == 1
        assert proof.partition_count(empty) == 1
        proof.to_config(empty)


def test_seal_operations_require_a_context() -> None:
    proof = RegisteredSealProof.STACKED_DRG_1KIB_V1
    with pytest.raises(TypeError):
        proof.partition_count()
    with pytest.raises(TypeError):
        proof.circuit_identifier()
    with pytest.raises(TypeError):
        RegisteredPoStProof.STACKED_DRG_1KIB_V1.verifying_key_content_id(None)  # type: ignore[arg-type]


# ---------- configs ----------


def test_seal_to_config_shape(ctx: RegistryContext) -> None:
    proof = RegisteredSealProof.STACKED_DRG_1GIB_V1
    cfg = proof.to_config(ctx)
    assert cfg == SealConfigV1(sector_size=1 << 30, partitions=TEST_PARTITIONS[1 << 30])
    assert cfg.version is ProofVersion.V1


def test_post_to_config_shape() -> None:
    cfg = RegisteredPoStProof.STACKED_DRG_256MIB_V1.to_config()
    assert isinstance(cfg, PoStConfigV1)
    assert cfg.sector_size == 1 << 28
    assert cfg.challenge_count == POST_CHALLENGE_COUNT
    assert cfg.challenged_nodes == POST_CHALLENGED_NODES
    assert cfg.priority is True


def test_to_config_without_builder_for_version_fails_explicitly(monkeypatch, ctx) -> None:
    monkeypatch.delitem(reg._BUILDERS[RegisteredSealProof], ProofVersion.V1)
    with pytest.raises(VersionMismatch) as ei:
        RegisteredSealProof.STACKED_DRG_1KIB_V1.to_config(ctx)
    assert ei.value.operation == "RegisteredSealProof.to_config"
    assert ei.value.got is ProofVersion.V1
    # The PoSt catalog keeps its own builders.
    RegisteredPoStProof.STACKED_DRG_1KIB_V1.to_config(ctx)


# ---------- lookups ----------


@pytest.mark.parametrize("proof", ALL, ids=lambda p: f"{type(p).__name__}.{p.tag}")
def test_from_tag_and_sector_size(proof) -> None:
    cls = type(proof)
    assert cls.from_tag(proof.tag) is proof
    assert cls.from_sector_size(proof.sector_size()) is proof


def test_unknown_tag_and_size_raise_decode_error() -> None:
    with pytest.raises(DecodeError):
        RegisteredSealProof.from_tag("StackedDrg64GiBV1")
    with pytest.raises(DecodeError):
        RegisteredPoStProof.from_tag("")
    with pytest.raises(DecodeError):
        RegisteredSealProof.from_sector_size(2048)


def test_each_catalog_defines_its_partition_count() -> None:
    assert "partition_count" in vars(RegisteredSealProof)
    assert "partition_count" in vars(RegisteredPoStProof)
    assert not hasattr(reg._ProofCatalog, "partition_count")

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
OverlapWeaver v0.1.0

Tests for configuration loading, overrides and validation.

Author: OverlapWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
import yaml

from overlapweaver.config import (
    ConfigParser,
    ConfigValidationError,
    DEFAULT_CONFIG,
    load_config,
    save_config_template,
    validate_config,
)


class TestConfigParser:
    """Test YAML loading and merging."""
    
    def test_defaults_without_file(self):
        parser = ConfigParser()
        
        assert parser.get('output.edges') == 'overlap.txt'
        assert parser.get('hardware.threads') == 1
        assert parser.get('overlap.kmer_size') is None
    
    def test_user_values_merged(self, temp_output_dir):
        path = temp_output_dir / "config.yaml"
        path.write_text(yaml.safe_dump({'overlap': {'length': 31}, 'hardware': {'threads': 4}}))
        
        parser = ConfigParser(path)
        
        assert parser.get('overlap.length') == 31
        assert parser.get('hardware.threads') == 4
        assert parser.get('overlap.strict_lengths') is False
        assert parser.get('output.edges') == 'overlap.txt'
    
    def test_defaults_not_mutated(self, temp_output_dir):
        path = temp_output_dir / "config.yaml"
        path.write_text(yaml.safe_dump({'output': {'edges': 'custom.txt'}}))
        
        ConfigParser(path)
        
        assert DEFAULT_CONFIG['output']['edges'] == 'overlap.txt'
    
    def test_env_substitution(self, temp_output_dir, monkeypatch):
        monkeypatch.setenv("OW_OUT", "/data/out")
        path = temp_output_dir / "config.yaml"
        path.write_text(
            "output:\n"
            "  edges: ${OW_OUT}/edges.txt\n"
            "  gfa: ${OW_MISSING:-graph.gfa}\n"
        )
        
        parser = ConfigParser(path)
        
        assert parser.get('output.edges') == '/data/out/edges.txt'
        assert parser.get('output.gfa') == 'graph.gfa'
    
    def test_cli_overrides_skip_none(self):
        parser = ConfigParser()
        
        parser.merge_cli_overrides({'overlap.length': 5, 'overlap.kmer_size': None})
        
        assert parser.get('overlap.length') == 5
        assert parser.get('overlap.kmer_size') is None
    
    def test_missing_file(self, temp_output_dir):
        with pytest.raises(FileNotFoundError):
            ConfigParser(temp_output_dir / "nope.yaml")
    
    def test_invalid_yaml(self, temp_output_dir):
        path = temp_output_dir / "bad.yaml"
        path.write_text("overlap: [unclosed\n")
        
        with pytest.raises(ConfigValidationError):
            ConfigParser(path)
    
    def test_validate_raises(self):
        parser = ConfigParser()
        parser.merge_cli_overrides({'hardware.threads': 0})
        
        with pytest.raises(ConfigValidationError):
            parser.validate()


class TestValidation:
    """Test validate_config error reporting."""
    
    def test_defaults_valid(self):
        assert validate_config(ConfigParser().to_dict()) == []
    
    def test_runtime_requirements(self):
        errors = validate_config(ConfigParser().to_dict(), require_runtime=True)
        
        assert "overlap.length is required" in errors
        assert "input.reads is required" in errors
    
    @pytest.mark.parametrize("key,value", [
        ('overlap.length', 0),
        ('overlap.kmer_size', -2),
        ('hardware.threads', 0),
        ('input.format', 'bam'),
        ('output.logging.level', 'LOUD'),
    ])
    def test_bad_values(self, key, value):
        parser = ConfigParser()
        parser.merge_cli_overrides({key: value})
        
        errors = validate_config(parser.to_dict())
        
        assert len(errors) == 1
        assert key in errors[0]
    
    def test_missing_section(self):
        assert validate_config({'input': {}}) == [
            "Missing required configuration section: overlap",
            "Missing required configuration section: hardware",
            "Missing required configuration section: output",
        ]


class TestTemplate:
    """Test template generation round-trip."""
    
    def test_template_loads_as_defaults(self, temp_output_dir):
        path = temp_output_dir / "template.yaml"
        
        save_config_template(path)
        
        assert load_config(path) == ConfigParser().to_dict()

# OverlapWeaver v0.1.0
# Any usage is subject to this software's license.

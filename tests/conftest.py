"""Shared test fixtures for antorder."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path


SECURITY_CONFIG_WITH_CONFLICT = """\
package app;

public class SecurityConfig {
    protected void configure(HttpSecurity http) throws Exception {
        http.authorizeRequests()
            .antMatchers("/admin/**").hasRole("ADMIN")
            .antMatchers("/admin/users").permitAll();
    }
}
"""

SECURITY_CONFIG_CLEAN = """\
package app;

public class SecurityConfig {
    protected void configure(HttpSecurity http) throws Exception {
        http.authorizeRequests()
            .antMatchers("/admin/users").permitAll()
            .antMatchers("/admin/**").hasRole("ADMIN");
    }
}
"""


@pytest.fixture()
def tmp_project(tmp_path: Path) -> Path:
    """Create a minimal Maven-style project with an empty Java source tree."""
    src_dir = tmp_path / "src" / "main" / "java" / "app"
    src_dir.mkdir(parents=True)
    return tmp_path


@pytest.fixture()
def conflict_project(tmp_project: Path) -> Path:
    """Project containing one misordered pattern."""
    path = tmp_project / "src" / "main" / "java" / "app" / "SecurityConfig.java"
    path.write_text(SECURITY_CONFIG_WITH_CONFLICT)
    return tmp_project


@pytest.fixture()
def clean_project(tmp_project: Path) -> Path:
    """Project whose patterns are ordered most specific first."""
    path = tmp_project / "src" / "main" / "java" / "app" / "SecurityConfig.java"
    path.write_text(SECURITY_CONFIG_CLEAN)
    return tmp_project

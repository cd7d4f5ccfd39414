"""
Pytest configuration and shared fixtures
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep the user's global config and environment out of tests"""
    from field_reorder.core import config as config_module

    monkeypatch.setattr(
        config_module, "GLOBAL_CONFIG_PATH", tmp_path / "home" / "config.yaml"
    )
    for var in ["FIELD_REORDER_DRY_RUN", "FIELD_REORDER_VERBOSE", "FIELD_REORDER_ENCODING"]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def sample_rust_code() -> str:
    """Rust source with one literal and one pattern out of order"""
    return """struct Point {
    x: i32,
    y: i32,
    z: i32,
}

fn make() -> Point {
    // build a point
    Point { z: 3, y: 2, x: 1 }
}

fn norm(p: Point) -> i32 {
    let Point { y, x, .. } = p;
    x * x + y * y
}

fn origin() -> Point {
    Point { x: 0, y: 0, z: 0 }
}
"""


@pytest.fixture
def sample_rust_file(tmp_path: Path, sample_rust_code: str) -> Path:
    """Write the sample Rust source to a temporary file"""
    file_path = tmp_path / "src" / "point.rs"
    file_path.parent.mkdir(parents=True)
    file_path.write_text(sample_rust_code)
    return file_path


@pytest.fixture
def wide_rust_code() -> str:
    """Rust source exercising most of the supported syntax"""
    return """use std::collections::HashMap;
use crate::{a, b::c as d};

#[derive(Debug, Clone)]
pub(crate) struct Config<T: Clone> where T: Default {
    pub name: String,
    values: Vec<T>,
}

struct Pair(i32, i32);
struct Unit;

enum Shape {
    Circle { radius: f64 },
    Square(f64),
    Empty,
}

trait Area {
    fn area(&self) -> f64;
}

impl Area for Shape {
    fn area(&self) -> f64 {
        match self {
            Shape::Circle { radius } => 3.14 * radius * radius,
            Shape::Square(side) => side * side,
            _ => 0.0,
        }
    }
}

mod geometry {
    pub const ORIGIN: (i32, i32) = (0, 0);
}

/* entry point */
fn main() {
    let mut total = 0;
    for i in 0..10 {
        if i % 2 == 0 {
            total += i;
        }
    }
    let names: Vec<String> = vec!["a".to_string()];
    let f = |x: i32| x + 1;
    if let Some(n) = names.first() {
        println!("{} {}", n, f(total));
    }
    while total > 0 {
        total -= 1;
    }
}
"""

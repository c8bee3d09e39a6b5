#!/usr/bin/env python3
"""
Smoke check for a running clinic records server.

Walks the front desk happy path against BASE_URL (default
http://127.0.0.1:8000): register a patient, add and complete a
treatment, attach an image, delete everything, and confirm the patient
is gone.  Exits non-zero on the first unexpected status.
"""
import os
import sys
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

BASE_URL = os.getenv("BASE_URL", "http://127.0.0.1:8000")


@dataclass
class CheckResult:
    success: bool
    endpoint: str
    method: str
    status_code: int
    response_time: float
    error_message: str = ""
    description: str = ""


class SmokeChecker:
    def __init__(self):
        self.session = requests.Session()
        self.results: List[CheckResult] = []

    def call(self, method: str, endpoint: str, data: Optional[Dict] = None,
             expected_status: int = 200, description: str = "") -> Any:
        url = f"{BASE_URL}{endpoint}"
        start_time = time.time()
        try:
            response = self.session.request(method, url, json=data, timeout=10)
        except requests.RequestException as e:
            self.results.append(CheckResult(False, endpoint, method, 0, time.time() - start_time, str(e), description))
            print(f"❌ {method} {endpoint} - {e}")
            return None
        response_time = time.time() - start_time
        ok = response.status_code == expected_status
        self.results.append(CheckResult(
            ok, endpoint, method, response.status_code, response_time,
            "" if ok else response.text[:200], description,
        ))
        mark = "✅" if ok else "❌"
        print(f"{mark} {method} {endpoint} -> {response.status_code} ({response_time:.2f}s) {description}")
        if not ok:
            return None
        return response.json()

    def run(self) -> bool:
        suffix = uuid.uuid4().hex[:6].upper()
        patient = self.call("POST", "/patients", {
            "nombre": "Ana",
            "apellido": "Lopez",
            "dni": f"SMOKE{suffix}",
            "numeroHistoriaClinica": f"HC-{suffix}",
            "telefono": "555-0101",
        }, expected_status=201, description="alta de paciente")
        if not patient:
            return False
        pid = patient["id"]

        treatments = self.call("POST", f"/patients/{pid}/treatments", {
            "fecha": "2024-01-10", "procedimiento": "Limpieza", "estado": "pendiente",
        }, expected_status=201, description="nuevo tratamiento")
        if not treatments or len(treatments) != 1:
            return False
        tid = treatments[0]["id"]

        steps = [
            ("PUT", f"/patients/{pid}/treatments/{tid}", {"estado": "completado"}, 200, "completar tratamiento"),
            ("POST", f"/patients/{pid}/images", {"url": "https://example.com/rx.jpg", "tipo": "radiografia"}, 201, "adjuntar imagen"),
            ("GET", "/patients/summary", None, 200, "resumen"),
            ("DELETE", f"/patients/{pid}", None, 200, "baja de paciente"),
            ("GET", f"/patients/{pid}", None, 404, "paciente eliminado"),
        ]
        for method, endpoint, body, expected, description in steps:
            if self.call(method, endpoint, body, expected, description) is None:
                return False
        return True


def main():
    checker = SmokeChecker()
    if checker.call("GET", "/healthz", description="health") is None:
        sys.exit(1)
    ok = checker.run()
    failed = [r for r in checker.results if not r.success]
    print(f"\n{len(checker.results) - len(failed)}/{len(checker.results)} checks passed")
    sys.exit(0 if ok and not failed else 1)


if __name__ == "__main__":
    main()

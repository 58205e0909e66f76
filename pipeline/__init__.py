"""
Verknüpfungs-Pipeline: Dokumente laden, verknüpfen und ausgeben.
"""

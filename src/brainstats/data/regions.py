"""
Known cortical region names.

Region members are ``str`` subclasses, so they can be used directly as keys
into parsed stats mappings (which are keyed by the raw names in the report).
"""

from enum import Enum


class Region(str, Enum):
    # DKT atlas regions
    PRECENTRAL = "precentral"
    POSTCENTRAL = "postcentral"
    PARACENTRAL = "paracentral"
    PERICALCARINE = "pericalcarine"
    CUNEUS = "cuneus"
    LINGUAL = "lingual"
    ENTORHINAL = "entorhinal"
    PARAHIPPOCAMPAL = "parahippocampal"
    MEDIAL_ORBITOFRONTAL = "medialorbitofrontal"
    LATERAL_ORBITOFRONTAL = "lateralorbitofrontal"
    SUPERIOR_TEMPORAL = "superiortemporal"
    MIDDLE_TEMPORAL = "middletemporal"
    INFERIOR_TEMPORAL = "inferiortemporal"
    PARS_OPERCULARIS = "parsopercularis"
    PARS_TRIANGULARIS = "parstriangularis"
    FUSIFORM = "fusiform"
    SUPRAMARGINAL = "supramarginal"
    INFERIOR_PARIETAL = "inferiorparietal"
    SUPERIOR_PARIETAL = "superiorparietal"
    PRECUNEUS = "precuneus"
    ROSTRAL_ANTERIOR_CINGULATE = "rostralanteriorcingulate"
    POSTERIOR_CINGULATE = "posteriorcingulate"
    INSULA = "insula"
    SUPERIOR_FRONTAL = "superiorfrontal"
    ROSTRAL_MIDDLE_FRONTAL = "rostralmiddlefrontal"
    CAUDAL_MIDDLE_FRONTAL = "caudalmiddlefrontal"
    LATERAL_OCCIPITAL = "lateraloccipital"

    # BA_exvivo cytoarchitectonic subregions
    BA3B = "BA3b_exvivo"
    BA4A = "BA4a_exvivo"
    BA4P = "BA4p_exvivo"
    BA44 = "BA44_exvivo"
    BA45 = "BA45_exvivo"

    # Not measured by FreeSurfer; scored through a proxy region
    PIRIFORM = "piriform"

    def __str__(self):
        return self.value

    @property
    def is_subregion(self) -> bool:
        return self.value.endswith("_exvivo")


# Structures without their own measurements and the region standing in for them
PROXY_REGIONS = {
    Region.PIRIFORM: Region.ENTORHINAL,
}
